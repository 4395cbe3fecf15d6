"""
Configuração de métricas Prometheus para o kvstore.
"""
from prometheus_client import Counter, Gauge, Histogram, start_http_server
import logging

logger = logging.getLogger(__name__)


# Métricas para o Store
store_metrics = {
    "reads": Counter(
        "kvstore_reads_total",
        "Número total de leituras de chaves",
        ["status"]
    ),
    "lists": Counter(
        "kvstore_lists_total",
        "Número total de listagens de chaves"
    ),
    "writes": Counter(
        "kvstore_writes_total",
        "Número total de escritas",
        ["kind"]
    ),
    "deletes": Counter(
        "kvstore_deletes_total",
        "Número total de remoções",
        ["status"]
    ),
    "errors": Counter(
        "kvstore_errors_total",
        "Número de requisições respondidas com erro interno",
        ["operation"]
    ),
    "keys": Gauge(
        "kvstore_keys",
        "Número de chaves armazenadas"
    ),
    "request_duration": Histogram(
        "kvstore_request_duration_seconds",
        "Duração do processamento das requisições",
        ["method"]
    )
}


def start_metrics_server(port: int) -> bool:
    """
    Inicia o servidor HTTP de métricas em uma porta separada.

    Args:
        port: Porta do servidor; 0 desativa as métricas.

    Returns:
        True se o servidor foi iniciado.
    """
    if not port:
        logger.info("Servidor de métricas desativado")
        return False

    start_http_server(port)
    logger.info(f"Servidor de métricas iniciado na porta {port}")
    return True
