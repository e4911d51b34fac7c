"""Run the gateway with ``python -m pdf_gateway``."""

from pdf_gateway.api.main import run_server

if __name__ == "__main__":
    run_server()
