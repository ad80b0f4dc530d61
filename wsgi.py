"""WSGI entry point: ``gunicorn -c gunicorn_config.py wsgi:app``."""
from skyfront import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000)
