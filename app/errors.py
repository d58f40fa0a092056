# app/errors.py
"""
Ошибки бизнес-логики.

Сервисы кидают их, API переводит в HTTP-статус
(см. register_exception_handlers в app/api/app.py),
бот просто показывает текст.
"""


class BackofficeError(Exception):
    """Базовая ошибка. status_code - во что превратится на HTTP."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(BackofficeError):
    """Ресторан / продукт / заказ не найден."""

    status_code = 404
    kind = "not_found"


class ValidationError(BackofficeError):
    """Входные данные не проходят бизнес-проверку (долг больше заказа и т.п.)."""

    status_code = 400
    kind = "validation"


class ConflictError(BackofficeError):
    """Дубликат или запись ещё используется."""

    status_code = 409
    kind = "conflict"


class AuthenticationError(BackofficeError):
    status_code = 401
    kind = "unauthenticated"


class PermissionDeniedError(BackofficeError):
    status_code = 403
    kind = "forbidden"
