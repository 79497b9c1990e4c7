import logging

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object('hotelsite.config.Config')
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
    )

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    CORS(app, resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}})

    from hotelsite.errors import register_error_handlers
    register_error_handlers(app)

    # Importar y registrar las rutas
    with app.app_context():
        from hotelsite import auth, models  # noqa: F401  (callbacks JWT y tablas)
        from hotelsite.routes import api
        app.register_blueprint(api)

        from hotelsite.cli import register_commands
        register_commands(app)

        db.create_all()  # Crear tablas si no existen

    return app
