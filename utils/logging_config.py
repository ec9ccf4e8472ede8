import logging
import logging.config

from flask import g, has_app_context


class UserFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'user'):
            user = None
            if has_app_context():
                user = (g.get("user") or {}).get("user_id")
            record.user = user or 'SYSTEM'  # Set default user if not provided
        return True


def build_logging_config(level="INFO"):
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(user)s - %(message)s'
            },
        },
        'filters': {
            'user_filter': {
                '()': UserFilter,
            },
        },
        'handlers': {
            'console': {
                'level': level,
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'filters': ['user_filter']
            },
        },
        'loggers': {
            'routes': {
                'handlers': ['console'],
                'level': level,
                'propagate': False,
            },
            'services': {
                'handlers': ['console'],
                'level': level,
                'propagate': False,
            },
            'realtime': {
                'handlers': ['console'],
                'level': level,
                'propagate': False,
            },
            '': {
                'handlers': ['console'],
                'level': level,
            }
        }
    }


def configure_logging(level="INFO"):
    logging.config.dictConfig(build_logging_config(level))
