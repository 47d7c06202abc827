from .main import run_service

run_service()
