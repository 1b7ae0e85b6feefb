"""Driver config keys sent by the code-generation host, mapped to CockroachConfig fields."""

DRIVER_CONFIG_KEYS: dict[str, str] = {
    "user": "username",
    "pass": "password",
    "dbname": "database",
    "host": "hostname",
    "port": "port",
    "sslmode": "sslmode",
    "schema": "schema_name",
    "whitelist": "whitelist",
    "blacklist": "blacklist",
    "add-enum-types": "add_enum_types",
    "enum-null-prefix": "enum_null_prefix",
}
