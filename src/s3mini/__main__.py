from s3mini.cli import app

app(prog_name="s3mini")
