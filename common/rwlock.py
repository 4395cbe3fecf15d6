"""
Lock de leitura/escrita para acesso concorrente a estruturas compartilhadas.
"""
import threading


class RWLock:
    """
    Lock de leitura/escrita.

    Vários leitores podem manter o lock ao mesmo tempo; um escritor tem acesso
    exclusivo. Quando há um escritor esperando, novos leitores aguardam, o que
    impede que um fluxo contínuo de leituras bloqueie as escritas.
    """

    def __init__(self):
        self._readers = 0  # Leitores ativos
        self._writer = False  # Escritor ativo
        self._waiting_writers = 0
        self._cond = threading.Condition(threading.Lock())

    def acquire_read(self):
        """Adquire o lock em modo compartilhado."""
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        """Libera o lock em modo compartilhado."""
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        """Adquire o lock em modo exclusivo."""
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._readers > 0 or self._writer:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self):
        """Libera o lock em modo exclusivo."""
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    def read_lock(self) -> "ReadLock":
        return ReadLock(self)

    def write_lock(self) -> "WriteLock":
        return WriteLock(self)


class ReadLock:
    """Context manager para o modo de leitura."""

    def __init__(self, rwlock: RWLock):
        self.rwlock = rwlock

    def __enter__(self):
        self.rwlock.acquire_read()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.rwlock.release_read()
        return False


class WriteLock:
    """Context manager para o modo de escrita."""

    def __init__(self, rwlock: RWLock):
        self.rwlock = rwlock

    def __enter__(self):
        self.rwlock.acquire_write()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.rwlock.release_write()
        return False
