"""Principal SQL query constants.

The users table belongs to the host application; only the columns the
permission engine reads are selected here.
"""

USER_GET_BY_USERNAME = """
    SELECT id, username, full_name
    FROM {schema}.users
    WHERE username = $1
"""

USER_GET_BY_ID = """
    SELECT id, username, full_name
    FROM {schema}.users
    WHERE id = $1
"""
