import argparse
import asyncio
import logging
from typing import List, Optional

import uvicorn

from common.logging import setup_logging
from common.metrics import start_metrics_server
from common.utils import get_debug_mode
from kvstore import config
from kvstore.api import create_api
from kvstore.store import Store

# Configuração do logger
logger = logging.getLogger(__name__)

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='KV Store - in-memory key-value server')
    parser.add_argument('--host', type=str, default=config.HOST, help=f'Host to bind (default: {config.HOST})')
    parser.add_argument('--port', type=int, default=config.PORT, help=f'Port to run the server on (default: {config.PORT})')
    parser.add_argument('--metrics-port', type=int, default=config.METRICS_PORT,
                        help=f'Port for Prometheus metrics, 0 to disable (default: {config.METRICS_PORT})')
    parser.add_argument('--shutdown-timeout', type=float, default=config.SHUTDOWN_TIMEOUT,
                        help=f'Seconds to wait for in-flight requests on shutdown (default: {config.SHUTDOWN_TIMEOUT})')
    parser.add_argument('--log-dir', type=str, default=config.LOG_DIR, help='Directory for log files')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    return parser.parse_args(argv)

def build_server(args: argparse.Namespace) -> uvicorn.Server:
    """
    Cria o store, a aplicação e o servidor uvicorn que a executa.
    """
    store = Store()
    app = create_api(store)

    server_config = uvicorn.Config(
        app,
        host=args.host,
        port=args.port,
        log_level="debug" if args.debug else "info",
        log_config=None,
        timeout_graceful_shutdown=args.shutdown_timeout,
    )
    return uvicorn.Server(server_config)

async def main(argv: Optional[List[str]] = None):
    """
    Função principal do componente KV Store.
    """
    args = parse_args(argv)
    args.debug = args.debug or get_debug_mode()

    setup_logging("kvstore", args.debug, args.log_dir)

    start_metrics_server(args.metrics_port)

    logger.info(f"Starting kvstore on {args.host}:{args.port}")

    # uvicorn trata SIGINT/SIGTERM: para de aceitar conexões e espera as requisições em andamento
    server = build_server(args)
    await server.serve()

    logger.info("kvstore shut down")

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
