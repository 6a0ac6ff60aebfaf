"""Access grant SQL query constants.

All queries are parameterized by schema. Grant rows are always returned
joined with their RC so listings carry the RC name.
"""

# Schema management
RC_ACCESS_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS {schema}.rc_access (
        id BIGSERIAL PRIMARY KEY,
        responsibility_centre_id BIGINT NOT NULL
            REFERENCES {schema}.responsibility_centres(id) ON DELETE CASCADE,
        user_id BIGINT
            REFERENCES {schema}.users(id) ON DELETE CASCADE,
        access_level VARCHAR(20) NOT NULL
            CHECK (access_level IN ('OWNER', 'READ_WRITE', 'READ_ONLY')),
        granted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        principal_type VARCHAR(20) NOT NULL DEFAULT 'USER'
            CHECK (principal_type IN ('USER', 'GROUP', 'DISTRIBUTION_LIST')),
        principal_identifier VARCHAR(255) NOT NULL,
        principal_display_name VARCHAR(255),
        granted_by_id BIGINT
            REFERENCES {schema}.users(id) ON DELETE SET NULL,
        CONSTRAINT chk_rc_access_group_without_user
            CHECK (principal_type = 'USER' OR user_id IS NULL)
    )
"""

RC_ACCESS_CREATE_INDEXES = [
    """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_rc_access_principal
        ON {schema}.rc_access (responsibility_centre_id, principal_identifier, principal_type)
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS uq_rc_access_user
        ON {schema}.rc_access (responsibility_centre_id, user_id)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_rc_access_principal_identifier
        ON {schema}.rc_access (principal_identifier, principal_type)
    """,
]

_GRANT_COLUMNS = """
        a.id, a.responsibility_centre_id, a.user_id, a.access_level, a.granted_at,
        a.principal_type, a.principal_identifier, a.principal_display_name,
        a.granted_by_id, rc.name AS resource_name
"""

# Grant retrieval queries
GRANT_GET_BY_ID = """
    SELECT """ + _GRANT_COLUMNS + """
    FROM {schema}.rc_access a
    JOIN {schema}.responsibility_centres rc ON rc.id = a.responsibility_centre_id
    WHERE a.id = $1
"""

GRANT_LIST_BY_RESOURCE = """
    SELECT """ + _GRANT_COLUMNS + """
    FROM {schema}.rc_access a
    JOIN {schema}.responsibility_centres rc ON rc.id = a.responsibility_centre_id
    WHERE a.responsibility_centre_id = $1
    ORDER BY a.granted_at, a.id
"""

GRANT_GET_BY_RESOURCE_AND_USER = """
    SELECT """ + _GRANT_COLUMNS + """
    FROM {schema}.rc_access a
    JOIN {schema}.responsibility_centres rc ON rc.id = a.responsibility_centre_id
    WHERE a.responsibility_centre_id = $1 AND a.user_id = $2
"""

GRANT_GET_BY_RESOURCE_AND_IDENTIFIER = """
    SELECT """ + _GRANT_COLUMNS + """
    FROM {schema}.rc_access a
    JOIN {schema}.responsibility_centres rc ON rc.id = a.responsibility_centre_id
    WHERE a.responsibility_centre_id = $1
      AND a.principal_identifier = $2
      AND a.principal_type = $3
"""

GRANT_LIST_BY_PRINCIPALS = """
    SELECT """ + _GRANT_COLUMNS + """
    FROM {schema}.rc_access a
    JOIN {schema}.responsibility_centres rc ON rc.id = a.responsibility_centre_id
    WHERE a.principal_identifier = ANY($1::text[])
      AND a.principal_type = ANY($2::text[])
      AND ($3::bigint IS NULL OR a.responsibility_centre_id = $3)
    ORDER BY a.responsibility_centre_id, a.granted_at, a.id
"""

GRANT_COUNT_OWNERS = """
    SELECT COUNT(*) FROM {schema}.rc_access
    WHERE responsibility_centre_id = $1 AND access_level = 'OWNER'
"""

# Grant mutation queries
GRANT_INSERT = """
    INSERT INTO {schema}.rc_access (
        responsibility_centre_id, user_id, access_level, principal_type,
        principal_identifier, principal_display_name, granted_by_id
    ) VALUES ($1, $2, $3, $4, $5, $6, $7)
    ON CONFLICT DO NOTHING
    RETURNING id, granted_at
"""

GRANT_UPDATE_LEVEL = """
    UPDATE {schema}.rc_access SET access_level = $2
    WHERE id = $1
    RETURNING id
"""

GRANT_DELETE = """
    DELETE FROM {schema}.rc_access
    WHERE id = $1
    RETURNING id
"""
