#!/usr/bin/env python3

import json

import flask
import pytest

from .normalize import *


cases = (
    ({'authorsArray': [{'author_name': 'Alice', 'is_new_author': True}]}, [NewAuthor(0, 'Alice')]),
    ({'authors': json.dumps([{'author_name': 'Alice', 'is_new_author': True}])}, [NewAuthor(0, 'Alice')]),
    ({'authorArray': [json.dumps([{'id_author': 5}])]}, [AuthorReference(0, 5)]),
    ({'author': ['Alice', 'Bob']}, [NewAuthor(0, 'Alice'), NewAuthor(1, 'Bob')]),
    ({'authorsArray': [{'idAuthor': '7', 'albumObj': {'idAlbum': '3'}}]}, [AuthorReference(0, 7, AlbumRef(3))]),
    ({'authorsArray': [{'id_author': 5, 'new_album': {'name': ' Live ', 'premium': '1'}}]},
     [AuthorReference(0, 5, None, NewAlbum('Live', None, '1'))]),
    ({'authorsArray': [{'id_author': 5, 'new_album': {'name': ''}, 'album': {'id_album': 'x'}}]}, [AuthorReference(0, 5)]),
    ({'authorsArray': [{'id_author': 0, 'author_name': 'Carol', 'is_new_author': 1}]}, [NewAuthor(0, 'Carol')]),
    ({'authorsArray': [{'id_author': True, 'authorName': 'Carol'}]}, [NamedAuthor(0, 'Carol')]),
    ({'authorsArray': [{'author_name': 'Dave', 'is_new_author': 'false'}]}, [NamedAuthor(0, 'Dave')]),
    ({'authorsArray': [{'isNewAuthor': True}]}, [NewAuthor(0, '')]),
    ({'authorsArray': [{}, 42, {'author_name': ' Erin '}]}, [NamedAuthor(2, 'Erin')]),
    ({'authorsArray': 'not json'}, []),
    ({'authorsArray': {'author_name': 'Alice'}}, []),
    ({'authorsArray': '{"author_name": "Alice"}'}, []),
    ({}, []),
)


@pytest.mark.parametrize('payload,expected', cases)
def test_authors(payload, expected):
    authors = normalize(payload).authors
    assert authors == expected
    assert [type(a) for a in authors] == [type(e) for e in expected]


def test_aliases_and_cleaning():
    request = normalize({
        'songName': '  Hello  ',
        'country': ' VN',
        'premium': 1,
        'audioFile': ['/public/mp3/a.mp3', '/public/mp3/b.mp3'],
        'lyric_file': 'x.txt',
        'lyric': 'y.txt',
    })
    assert request.song_name == 'Hello'
    assert request.country == 'VN'
    assert request.premium == '1'
    assert request.style == ''
    assert request.image_field is None
    assert request.audio_field == '/public/mp3/a.mp3'
    assert request.lyric_field == 'y.txt'
    assert request.authors == []


def test_first_alias_wins():
    request = normalize({'songName': 'camel', 'song_name': 'snake', 'audioFile': 'b', 'audio': 'a'})
    assert request.song_name == 'snake'
    assert request.audio_field == 'a'


def test_text_is_repaired():
    assert clean(' Ã¼ber\x00 ') == 'über'
    assert clean(None) == ''
    assert clean(3) == '3'


@pytest.mark.parametrize('value,expected', (
    (5, 5), ('12', 12), (' 3 ', 3), (4.0, 4),
    (0, None), (-1, None), ('1.5', None), ('abc', None), (True, None), (None, None),
))
def test_as_id(value, expected):
    assert as_id(value) == expected


def test_read_form_payload():
    app = flask.Flask(__name__)
    with app.test_request_context('/', method='POST', data={
            'song_name': 'Form Song',
            'authorsArray[]': ['Alice', 'Bob'],
            'style': ['pop', 'rock']}):
        payload = read_payload(flask.request)
    assert payload == {'song_name': 'Form Song', 'authorsArray': ['Alice', 'Bob'], 'style': ['pop', 'rock']}
    assert normalize(payload).style == 'pop'


def test_read_json_payload():
    app = flask.Flask(__name__)
    with app.test_request_context('/', method='POST', json={'song_name': 'Json Song'}):
        assert read_payload(flask.request) == {'song_name': 'Json Song'}
    with app.test_request_context('/', method='POST', json=['not', 'an', 'object']):
        assert read_payload(flask.request) == {}


def test_read_nested_form_payload():
    app = flask.Flask(__name__)
    with app.test_request_context('/', method='POST', data={
            'song_name': 'Nested',
            'authorsArray[1][id_author]': '5',
            'authorsArray[1][new_album][name]': 'Live',
            'authorsArray[0][author_name]': 'Alice',
            'authorsArray[0][is_new_author]': '1',
            'broken[': 'kept flat'}):
        payload = read_payload(flask.request)
    assert payload['authorsArray'] == [
        {'author_name': 'Alice', 'is_new_author': '1'},
        {'id_author': '5', 'new_album': {'name': 'Live'}},
    ]
    assert payload['broken['] == 'kept flat'
    assert normalize(payload).authors == [
        NewAuthor(0, 'Alice'),
        AuthorReference(1, 5, None, NewAlbum('Live')),
    ]


@pytest.mark.parametrize('key,expected', (
    ('plain', ('plain', [])),
    ('a[]', ('a', [''])),
    ('a[0][b]', ('a', ['0', 'b'])),
    ('a[0]x', ('a[0]x', [])),
    ('[0]', ('[0]', [])),
))
def test_split_key(key, expected):
    assert split_key(key) == expected
