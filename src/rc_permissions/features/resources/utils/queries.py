"""Responsibility Centre SQL query constants."""

RC_GET_BY_ID = """
    SELECT rc.id, rc.name, rc.description, rc.created_at,
           u.id AS owner_id, u.username AS owner_username, u.full_name AS owner_full_name
    FROM {schema}.responsibility_centres rc
    JOIN {schema}.users u ON u.id = rc.owner_id
    WHERE rc.id = $1
"""
