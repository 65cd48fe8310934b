from evalengine.cli import run

run()
