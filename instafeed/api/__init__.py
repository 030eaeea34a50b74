from instafeed.api.routes import router

__all__ = ["router"]
