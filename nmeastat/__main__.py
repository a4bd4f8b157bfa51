from nmeastat.cli import app

app()
