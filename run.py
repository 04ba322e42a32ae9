"""Development entry point: ``python run.py`` (or ``flask --app run run``)."""
from src.school_attendance.school_attendance.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
