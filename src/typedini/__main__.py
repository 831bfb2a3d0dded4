from typedini.cli.app import app

app(prog_name="typedini")
