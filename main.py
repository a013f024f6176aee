import argparse
import logging

import uvicorn

from core.config_loader import load_config
from database.database import Database
from database.init_db import init_db
from web.backend.app import create_app as create_match_app
from web.gateway.app import create_app as create_gateway_app
from web.shared.logging_config import setup_logging
from web.users.app import create_app as create_users_app

logger = logging.getLogger(__name__)

SERVICES = {
    # name: (app factory, port attribute on ServicesConfig)
    'gateway': (create_gateway_app, 'gateway_port'),
    'matches': (create_match_app, 'match_service_port'),
    'users': (create_users_app, 'user_service_port'),
}


def main():
    parser = argparse.ArgumentParser(description="TalentMatch service runner")
    parser.add_argument('service', choices=sorted(SERVICES) + ['init-db'],
                        help='Service to run, or init-db to create the tables and exit')
    parser.add_argument('--host', default='0.0.0.0')
    parser.add_argument('--port', type=int, default=None, help='Override the configured port')
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    args = parser.parse_args()

    setup_logging()
    config = load_config(args.config)

    if args.service == 'init-db':
        init_db(Database(config.database.url))
        logger.info("Database initialized")
        return

    factory, port_attr = SERVICES[args.service]
    if args.service in ('matches', 'users'):
        app = factory(config, database=init_db(Database(config.database.url)))
    else:
        app = factory(config)
    port = args.port or getattr(config.services, port_attr)
    logger.info(f"Starting {args.service} on {args.host}:{port}")

    uvicorn.run(
        app,
        host=args.host,
        port=port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
