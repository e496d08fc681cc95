from songvault import config
from songvault.app import create_app
import os

settings = config.load()
app = create_app(settings)
app.debug = os.environ.get('FLASK_DEBUG', '0') == '1'
from gevent import pywsgi
server = pywsgi.WSGIServer((settings.host, settings.port), app)
server.serve_forever()
