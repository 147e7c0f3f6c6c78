from .main import create_app

app = create_app()
app.run(debug=bool(app.config.get("DEBUG", False)))
