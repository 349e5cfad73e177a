"""Combinador "primeiro sucesso vence" sobre uma lista ordenada.

Genérico sobre o protocolo do provedor: cada candidato (credencial,
provedor, endpoint) é tentado em sequência, sem paralelismo e sem
memorizar qual candidato funcionou em chamadas anteriores.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from tiktok_relay.observability.logging import get_logger

logger = get_logger(__name__)

C = TypeVar("C")
T = TypeVar("T")


class AttemptFailedError(Exception):
    """Falha recuperável de um candidato; o próximo será tentado."""


class FailoverExhaustedError(Exception):
    """Todos os candidatos falharam.

    Attributes:
        last_error: Última falha observada (None se a lista estava vazia)
        attempts: Quantidade de candidatos tentados
    """

    def __init__(self, last_error: Exception | None, attempts: int) -> None:
        super().__init__(f"{attempts} attempt(s) failed. Last error: {last_error}")
        self.last_error = last_error
        self.attempts = attempts


async def first_success(
    candidates: Sequence[C],
    attempt: Callable[[C], Awaitable[T]],
    *,
    recoverable: tuple[type[Exception], ...] = (AttemptFailedError,),
) -> T:
    """Retorna o resultado do primeiro candidato bem-sucedido.

    Exceções fora de `recoverable` propagam imediatamente.

    Raises:
        FailoverExhaustedError: Se todos os candidatos falharem
    """
    last_error: Exception | None = None
    attempts = 0

    for candidate in candidates:
        attempts += 1
        try:
            return await attempt(candidate)
        except recoverable as exc:
            last_error = exc
            logger.debug(
                "failover_candidate_failed",
                extra={"attempt": attempts, "error": str(exc)},
            )

    raise FailoverExhaustedError(last_error, attempts)
