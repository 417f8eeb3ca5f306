"""A simple, dockerized, deployable Flask web application.

Answers every request to the root path with a fixed greeting. The
container listens on all interfaces (0.0.0.0) at port 80, which is the
port the load balancer target group forwards traffic to.

To try it locally:
    docker build -t hello-world .
    docker container run --rm -p 8080:80 -d hello-world
    curl http://localhost:8080/
"""

import logging

from flask import Flask

PORT = 80
BODY = "HELLO WORLD"

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def create_app():
    """Create the Flask application."""
    app = Flask(__name__)

    # Decorator that tells Flask what URL
    # should trigger the function that follows.
    @app.route("/")
    def hello():
        """Return the greeting."""
        return BODY

    return app


def serve(host="0.0.0.0", port=PORT):
    """Run the server until the process is terminated.

    A failure to bind the port is fatal: werkzeug reports it and exits
    the process.
    """
    app = create_app()
    logger.info(f"Start server on port {port}")
    app.run(host=host, port=port)


if __name__ == "__main__":
    logging.basicConfig()
    serve()
