"""
API Server Runner

Entry point for running the FastAPI server with command-line configuration
of host, port, environment and dataset location.
"""

import argparse
import logging
import os
import sys
import traceback
from pathlib import Path

import uvicorn

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("api_runner")


def parse_arguments():
    """Parse command line arguments for the API server."""
    parser = argparse.ArgumentParser(description="Run the Email Brain API server")

    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind the server to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8001")),
        help="Port to bind the server to (default: $PORT or 8001)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    parser.add_argument(
        "--env",
        type=str,
        choices=["development", "testing", "production"],
        default="development",
        help="Environment to run in (default: development)"
    )

    parser.add_argument(
        "--dataset",
        type=str,
        default=None,
        help="Path to the mailbox dataset JSON (default: $DATASET_PATH or data/mock_data.json)"
    )

    return parser.parse_args()


def setup_environment(env: str, dataset: str = None):
    """
    Export environment settings read by the API configuration.

    Args:
        env: Environment name (development, testing, production)
        dataset: Optional dataset path override
    """
    os.environ["ENVIRONMENT"] = env
    os.environ["DEBUG"] = "true" if env in ["development", "testing"] else "false"

    if dataset:
        os.environ["DATASET_PATH"] = dataset

    dataset_path = Path(os.environ.get("DATASET_PATH", "data/mock_data.json"))
    if not dataset_path.exists():
        logger.warning(f"Dataset not found at {dataset_path}; the mailbox will be empty")

    if not os.environ.get("GROQ_API_KEY"):
        logger.warning("GROQ_API_KEY is not set; email processing and chat will fail")


def main():
    """Parse arguments, prepare the environment and start uvicorn."""
    args = parse_arguments()
    setup_environment(args.env, args.dataset)

    logger.info(f"Starting API server in {args.env} mode")
    logger.info(f"Server will be available at http://{args.host}:{args.port}")

    if args.env == "development":
        logger.info(f"API documentation will be available at http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info" if args.env == "production" else "debug"
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error running server: {str(e)}")
        logger.error(traceback.format_exc())
        sys.exit(1)
