"""
orgnav.config.defaults - Default configuration values
"""

DEFAULT_CONFIG = {
    "source": {
        # JSON snapshot file; relative paths resolve against the config file
        "path": "",
        "id_field": "id",
        "parent_field": "parent_id",
    },
    "tree": {
        # "source" keeps snapshot order, "name" sorts siblings by name
        "child_order": "source",
    },
    "navigation": {
        # "strict" or "preserve-root-on-back"
        "selection_policy": "strict",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5050,
    },
}

CONFIG_FILENAME = ".orgnav.toml"
ENV_PREFIX = "ORGNAV_"
