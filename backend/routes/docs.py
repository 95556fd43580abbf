"""
Documentation routes - outside the contract mechanism.

Endpoints:
- GET /      plain-text greeting
- GET /doc   OpenAPI document generated from the bound contracts
- GET /ui    Swagger UI page that loads /doc
"""

from flask import Blueprint, current_app, jsonify, render_template_string

SWAGGER_UI_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="{{ cdn }}/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="{{ cdn }}/swagger-ui-bundle.js"></script>
  <script>
    window.ui = SwaggerUIBundle({ url: {{ doc_url|tojson }}, dom_id: '#swagger-ui' });
  </script>
</body>
</html>
"""


def create_docs_blueprint(registry, doc_path: str, ui_path: str) -> Blueprint:
    """Blueprint serving /, the OpenAPI document and the Swagger UI page."""
    docs_bp = Blueprint('docs', __name__)

    @docs_bp.route("/", methods=["GET"])
    def index():
        return current_app.config['GREETING'], 200, {'Content-Type': 'text/plain; charset=utf-8'}

    def openapi_document():
        config = current_app.config
        return jsonify(registry.export(
            title=config['API_TITLE'],
            version=config['API_VERSION'],
            description=config['API_DESCRIPTION'],
        ))

    def swagger_ui():
        config = current_app.config
        return render_template_string(
            SWAGGER_UI_TEMPLATE,
            title=config['API_TITLE'],
            cdn=config['SWAGGER_UI_CDN'].rstrip('/'),
            doc_url=config['DOC_PATH'],
        )

    docs_bp.add_url_rule(doc_path, 'openapi_document', openapi_document, methods=["GET"])
    docs_bp.add_url_rule(ui_path, 'swagger_ui', swagger_ui, methods=["GET"])
    return docs_bp
