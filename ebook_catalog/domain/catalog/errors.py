class CatalogError(Exception):
    """Base de los errores de dominio. ``tag`` es lo que ve el cliente."""

    tag = "catalog_error"
    status_code = 500

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.tag)
        self.detail = detail or self.tag

class ValidationError(CatalogError):
    tag = "validation_error"
    status_code = 400

class Unauthorized(CatalogError):
    tag = "unauthorized"
    status_code = 401

class NotFound(CatalogError):
    tag = "not_found"
    status_code = 404

class UpstreamError(CatalogError):
    tag = "upstream_error"
    status_code = 500
