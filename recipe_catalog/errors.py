from __future__ import annotations


class RecipeCatalogError(Exception):
    pass


class ValidationError(RecipeCatalogError):
    """
    Parámetros o DTO inválidos. `errors` mapea campo -> mensajes.
    """

    def __init__(self, errors: dict[str, list[str]], message: str = "Se produjeron uno o más errores de validación."):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class NotFoundError(RecipeCatalogError):
    def __init__(self, resource: str, resource_id: object = None):
        detail = f"{resource} no encontrado" if resource_id is None else f"{resource} {resource_id} no encontrado"
        super().__init__(detail)
        self.resource = resource
        self.resource_id = resource_id


class AuthorizationError(RecipeCatalogError):
    def __init__(self, operation: str, resource: str):
        super().__init__(f"El usuario no está autorizado a ejecutar {operation} sobre {resource}.")
        self.operation = operation
        self.resource = resource


class UnavailableError(RecipeCatalogError):
    """
    El proveedor de embeddings no está disponible. Dispara el modo de búsqueda
    por subcadena; nunca llega al cliente.
    """
    pass
