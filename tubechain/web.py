from http.server import BaseHTTPRequestHandler
import json
import urllib.parse


class JsonHandler(BaseHTTPRequestHandler):
    """
    Serverless JSON endpoint with permissive CORS.

    Subclasses implement `respond(source)` returning (status_code, payload),
    where `source` is the `url` value from the query string or JSON body.
    """

    def send_cors_headers(self):
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, POST, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type')

    def set_headers(self, status_code=200):
        self.send_response(status_code)
        self.send_cors_headers()
        self.send_header('Content-type', 'application/json')
        self.end_headers()

    def write_json(self, status_code, payload):
        body = json.dumps(payload, indent=2).encode()
        self.set_headers(status_code)
        self.wfile.write(body)

    def do_OPTIONS(self):
        self.send_response(200)
        self.send_cors_headers()
        self.send_header('Content-Length', '0')
        self.end_headers()

    def do_GET(self):
        query_params = urllib.parse.parse_qs(urllib.parse.urlparse(self.path).query)
        self.handle_source(query_params.get('url', [None])[0])

    def do_POST(self):
        try:
            length = int(self.headers.get('Content-Length') or 0)
        except ValueError:
            length = 0
        raw = self.rfile.read(length) if length > 0 else b''
        source = None
        if raw:
            try:
                body = json.loads(raw.decode('utf-8'))
            except ValueError:
                body = urllib.parse.parse_qs(raw.decode('utf-8', 'replace'))
                body = {key: values[0] for key, values in body.items()}
            if isinstance(body, dict):
                source = body.get('url')
        self.handle_source(source)

    def handle_source(self, source):
        try:
            status_code, payload = self.respond(source)
        except Exception as e:
            print(f"Unhandled error: {type(e).__name__}: {e}")
            status_code, payload = 500, {
                "status": "error",
                "message": "Internal server error",
            }
        self.write_json(status_code, payload)

    def respond(self, source):
        raise NotImplementedError
