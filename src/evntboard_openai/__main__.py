from evntboard_openai.cli.app import app

app()
