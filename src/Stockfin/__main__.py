from Stockfin.cli import app

app(prog_name="stockfin")
