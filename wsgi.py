"""
Production WSGI entry point.

Uses lazy initialization so the app is created at runtime,
after the platform has injected environment variables.
"""
import os

_app = None


def get_app():
    """Get or create the Flask app instance."""
    global _app
    if _app is None:
        from hiretrack_app import create_app
        _app = create_app(os.environ.get('FLASK_ENV', 'production'))
    return _app


# For gunicorn: the first request creates the app, later ones reuse it
def app(environ, start_response):
    """WSGI application entry point."""
    return get_app()(environ, start_response)


if __name__ == '__main__':
    get_app().run()
