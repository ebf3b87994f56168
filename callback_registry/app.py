# callback_registry/app.py
import atexit
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from .api.rest import rest_bp
from .utils.logging import get_logger
from .domain.errors import AppError
from .services.registry import Registry, RegistryConfig

log = get_logger(__name__)

def create_app(registry: Registry = None, start_gc: bool = True, **options):
    """
    `options` override RegistryConfig fields (mount, max_age) on top of the
    environment settings, e.g. create_app(mount="/tmp/", max_age=0). They
    cannot be combined with a ready-made `registry`.
    """
    if registry is not None and options:
        raise TypeError(f"config options {sorted(options)} given along with a registry")
    app = Flask(__name__)

    registry = registry or Registry(RegistryConfig.from_settings(**options))
    app.extensions["rest"] = registry

    # temporary callbacks live under the mount prefix
    app.register_blueprint(rest_bp, url_prefix=registry.mount.rstrip("/"))

    if start_gc:
        registry.start()
        atexit.register(registry.stop)

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        log.warning(f"AppError: {err.message}")
        return jsonify({"error": err.message}), err.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.name}), e.code
        log.exception("Unhandled error")
        return jsonify({"error": "internal_error"}), 500

    return app

if __name__ == "__main__":
    from .utils.config import settings
    create_app().run(host="0.0.0.0", port=settings.PORT, debug=settings.ENV == "dev")
