"""Development entry point: ``python app.py``.

Settings come from APP_ENV (see ``attendance_dashboard.config``) and ``.env``.
"""
from attendance_dashboard.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
