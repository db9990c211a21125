import asyncio
import os

from flask import Flask, jsonify, request

from f95metadata import (
    AuthenticationFailed,
    FetchFailed,
    Scraper,
    ScraperError,
    cookies_from_env,
    id_from_link,
    verify_cookies,
)
from f95metadata.logging_config import logger, setup_logging
from f95metadata.notifications import default_notifier

# Constants
MIN_SEARCH_LENGTH = 3
HOST = os.environ.get("FLASK_HOST", "127.0.0.1")
PORT = int(os.environ.get("FLASK_PORT", "5000"))


def build_default_scraper():
    """Scraper wired from the environment: F95_COOKIES and optional Pushover credentials."""
    cookies = cookies_from_env()
    for problem in verify_cookies(cookies):
        logger.warning(f"COOKIES: {problem}")
    return Scraper(cookies=cookies, notifier=default_notifier())


def _error_response(error):
    if isinstance(error, AuthenticationFailed):
        status = 401
    elif isinstance(error, FetchFailed):
        status = 502
    else:
        status = 503
    body = {"error": type(error).__name__, "message": error.user_message()}
    if isinstance(error, FetchFailed):
        body["status"] = error.status
    return jsonify(body), status


def create_app(scraper=None):
    """Creates the Flask app exposing thread scraping and search as JSON."""
    setup_logging()
    flask_app = Flask(__name__)
    flask_app.logger = logger # Use our configured logger
    flask_app.config['SCRAPER'] = scraper if scraper is not None else build_default_scraper()

    def _scrape(thread_id):
        try:
            result = asyncio.run(flask_app.config['SCRAPER'].fetch_page(thread_id))
        except ScraperError as e:
            return _error_response(e)
        return jsonify(result.to_dict())

    @flask_app.route('/threads/<thread_id>', methods=['GET'])
    def get_thread(thread_id):
        return _scrape(thread_id)

    @flask_app.route('/threads', methods=['GET'])
    def get_thread_by_url():
        link = request.args.get('url', '')
        thread_id = id_from_link(link)
        if thread_id is None:
            return jsonify({"error": "BadRequest", "message": f"Not a thread link: '{link}'"}), 400
        return _scrape(thread_id)

    @flask_app.route('/search_games_api', methods=['GET'])
    def search_games_api():
        query = request.args.get('query')
        if not query or len(query) < MIN_SEARCH_LENGTH:
            return jsonify([])
        results = asyncio.run(flask_app.config['SCRAPER'].search(query))
        return jsonify([result.to_dict() for result in results])

    return flask_app


if __name__ == '__main__':
    create_app().run(host=HOST, port=PORT)
