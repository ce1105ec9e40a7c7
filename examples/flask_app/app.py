# examples/flask_app/app.py - Sample Flask application with the Database panel
"""
Example Flask application wiring querybar into the request lifecycle.

Every request gets its own RequestScope in flask.g; queries go through
scope.track_query() and the finished toolbar report is kept for
inspection at /_debug/<request_id>.
"""

from collections import OrderedDict
import os
import sqlite3
import tempfile

from flask import Flask, g, jsonify

from querybar.collector.request_scope import RequestScope
from querybar.toolbar import Toolbar
from querybar.utils.config import Config

app = Flask(__name__)

DB_FILE = os.path.join(tempfile.gettempdir(), "querybar_example.db")
MAX_REPORTS = 50

config = Config()
reports = OrderedDict()


def init_db():
    """Create and seed the example database"""
    with sqlite3.connect(DB_FILE) as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS users (id INTEGER PRIMARY KEY, name TEXT)")
        if conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 0:
            conn.executemany("INSERT INTO users (name) VALUES (?)",
                             [("alice",), ("bob",), ("carol",)])


init_db()


def get_db():
    """Open the request's connection, timing the connect"""
    if 'db' not in g:
        with g.querybar.connections.connect('default'):
            g.db = sqlite3.connect(DB_FILE)
    return g.db


def query(sql, params=()):
    with g.querybar.track_query(sql, 'default', params):
        return get_db().execute(sql, params).fetchall()


@app.before_request
def open_scope():
    g.querybar = RequestScope(config)


@app.after_request
def close_scope(response):
    scope = g.querybar
    reports[scope.request_id] = Toolbar.for_scope(scope).report()
    while len(reports) > MAX_REPORTS:
        reports.popitem(last=False)

    response.headers['X-Debug-Request'] = scope.request_id
    response.headers['X-Debug-Queries'] = str(scope.collector.badge_count())
    return response


@app.teardown_request
def close_db(exc):
    db = g.pop('db', None)
    if db is not None:
        db.close()


@app.route('/users')
def list_users():
    rows = query("SELECT id, name FROM users ORDER BY id")
    return jsonify([{"id": r[0], "name": r[1]} for r in rows])


@app.route('/users/<int:user_id>')
def get_user(user_id):
    rows = query("SELECT id, name FROM users WHERE id = ?", (user_id,))
    if not rows:
        return jsonify({"error": "not found"}), 404
    return jsonify({"id": rows[0][0], "name": rows[0][1]})


@app.route('/_debug/<request_id>')
def debug_report(request_id):
    report = reports.get(request_id)
    if report is None:
        return jsonify({"error": "unknown request"}), 404
    return jsonify(report)


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
