import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

def get_env_var(var_name: str, default: Any = None) -> Any:
    """
    Obtém uma variável de ambiente, com valor padrão opcional.

    Args:
        var_name: Nome da variável de ambiente
        default: Valor padrão caso a variável não exista

    Returns:
        Valor da variável de ambiente ou o valor padrão
    """
    return os.environ.get(var_name, default)

def get_env_str(var_name: str, default: str = "") -> str:
    """Obtém uma variável de ambiente como string."""
    return str(get_env_var(var_name, default))

def get_env_int(var_name: str, default: int = 0) -> int:
    """
    Obtém uma variável de ambiente como inteiro.

    Valores que não podem ser convertidos são ignorados com um aviso
    e o valor padrão é usado.
    """
    value = get_env_var(var_name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Valor inválido para {var_name}: {value!r}, usando {default}")
        return default

def get_env_float(var_name: str, default: float = 0.0) -> float:
    """Obtém uma variável de ambiente como float."""
    value = get_env_var(var_name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Valor inválido para {var_name}: {value!r}, usando {default}")
        return default

def get_debug_mode() -> bool:
    """
    Verifica se o modo de depuração está ativado.

    Returns:
        bool: True se o modo de depuração estiver ativado, False caso contrário
    """
    debug_env = get_env_var("DEBUG", "false").lower()
    return debug_env in ("true", "1", "yes")
