from solkit.cli import app

app(prog_name="solkit")
