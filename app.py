import logging
import uuid
from typing import Optional

from flask import Flask, request, jsonify

from receipt import Receipt
from scorer import calculate_points
from store import ReceiptStore
from validator import validate_receipt

HOST = "0.0.0.0"
PORT = 8080


def create_app(store: Optional[ReceiptStore] = None) -> Flask:
    """ Builds the Flask app with its routes bound to the given receipt store """
    app = Flask(__name__)
    receipts = store if store is not None else ReceiptStore()

    @app.route('/receipts/process', methods=['POST'])
    def process_receipt():
        """
        Router for receipt processing requests. The input JSON is checked for
        structure and then validated; a valid receipt is stored in memory
        under a freshly generated id, which is returned to the user. Points
        are not computed here but on the first lookup.

        Returns:
            400 Error with an empty body if the input JSON is invalid
            200 OK and generated receipt id if input JSON is valid
        """
        payload = request.get_json(force=True, silent=True)
        try:
            receipt = Receipt.from_json(payload)
            validate_receipt(receipt)
        except ValueError as e:
            app.logger.info("Rejected receipt: %s", e)
            return "", 400
        receipt_id = receipts.put(receipt)
        app.logger.info("Accepted receipt %s", receipt_id)
        return jsonify({"id": str(receipt_id)})

    @app.route('/receipts/<receipt_id>/points', methods=['GET'])
    def get_points(receipt_id):
        """
        Router for points lookups. The id is used to find the cached score,
        or failing that the stored receipt, which is then scored once and
        the result cached beside it.

        Returns:
            404 Error with an empty body if the id is malformed or not found
            200 OK and the points for the receipt if the id is present in memory
        """
        try:
            parsed_id = uuid.UUID(receipt_id)
        except ValueError:
            app.logger.info("Malformed receipt id (%s)", receipt_id)
            return "", 404

        points = receipts.get_score(parsed_id)
        if points is not None:
            app.logger.debug("Cached points for receipt %s", parsed_id)
            return jsonify({"points": points})

        receipt = receipts.get_receipt(parsed_id)
        if receipt is None:
            app.logger.info("Receipt id not found (%s)", parsed_id)
            return "", 404

        # scored outside the store locks, a racing request may score it too
        points = calculate_points(receipt)
        receipts.put_score(parsed_id, points)
        app.logger.info("Scored receipt %s: %d points", parsed_id, points)
        return jsonify({"points": points})

    @app.after_request
    def log_request(response):
        app.logger.info("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    return app


flask_app = create_app()


def main():
    flask_app.logger.setLevel(logging.INFO)
    flask_app.run(host=HOST, port=PORT, threaded=True)
    # setting threaded=True allows Flask to concurrently handle requests


if __name__ == '__main__':
    main()
