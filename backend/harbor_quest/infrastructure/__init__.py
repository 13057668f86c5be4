"""Infrastructure Layer — database access, SQL-backed collaborators, logging setup."""
