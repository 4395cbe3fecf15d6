"""
Configurações para o componente KV Store.
"""
from common.utils import get_env_int, get_env_str, get_env_float


# Configurações do servidor
HOST = get_env_str("HOST", "0.0.0.0")
PORT = get_env_int("PORT", 8080)

# Porta do servidor Prometheus (0 desativa)
METRICS_PORT = get_env_int("METRICS_PORT", 9090)

# Tempo máximo para requisições em andamento no encerramento
SHUTDOWN_TIMEOUT = get_env_float("SHUTDOWN_TIMEOUT", 5.0)  # 5 segundos

# Diretório de logs (vazio: apenas console)
LOG_DIR = get_env_str("LOG_DIR", "")
