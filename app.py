"""Server entry point for the impact barplot demo."""

from press_impact.examples.impact_demo import build_app

app = build_app()
server = app.server  # expose Flask server for gunicorn

if __name__ == "__main__":
    from press_impact.config import settings
    from press_impact.helpers.logging_helpers import configure_logger

    configure_logger("app")
    app.run(host=settings.host, debug=settings.debug, port=settings.port)
