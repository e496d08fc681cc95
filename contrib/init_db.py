#!/usr/bin/env python3

from songvault import config
from songvault.database import Database

settings = config.load()
db = Database(settings.database_url)
db.engine.echo = True
db.create()
