from contact_api.main import run

run()
