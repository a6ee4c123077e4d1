from lokalise_keys.add_keys import run

run()
