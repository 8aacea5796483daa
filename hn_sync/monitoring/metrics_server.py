import time

from prometheus_client import start_http_server


def run_metrics_server(port: int) -> None:
    start_http_server(port)
    while True:
        time.sleep(1)
