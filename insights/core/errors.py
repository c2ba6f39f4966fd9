from __future__ import annotations


class ContractViolation(Exception):
    """
    Erro de programação do chamador (ex.: janela com start > end, preço
    negativo no catálogo). Dados sujos "normais" nunca levantam esta exceção:
    são degradados localmente e logados.
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} ({details})"
