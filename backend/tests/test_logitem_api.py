from fastapi.testclient import TestClient

from cli_metrics.main import create_app
from cli_metrics.store import RecordStore


def post_item(client, **body):
    body.setdefault('result_code', 0)
    return client.post('/v1.0/logitem', json=body)


def test_create_then_get_delete(client):
    r = client.post(
        '/v1.0/logitem',
        json={'result_code': 0, 'machine_id': 'm1', 'info': 'start'},
    )
    assert r.status_code == 200, r.text
    created = r.json()
    assert created['id'] == 1
    assert created['result_code'] == 0
    assert created['machine_id'] == 'm1'
    assert created['info'] == 'start'
    assert created['inserted_datetime']

    r = client.get('/v1.0/logitem/1')
    assert r.status_code == 200
    assert r.json() == created

    r = client.delete('/v1.0/logitem/1')
    assert r.status_code == 200
    assert r.json() == []

    r = client.get('/v1.0/logitem/1')
    assert r.status_code == 404


def test_create_with_explicit_id_twice_keeps_last(client):
    r1 = client.post('/v1.0/logitem', json={'id': 5, 'result_code': 2, 'info': 'x'})
    r2 = client.post('/v1.0/logitem', json={'id': 5, 'result_code': 2, 'info': 'y'})
    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r2.json()['id'] == 5

    assert client.get('/v1.0/logitem/5').json()['info'] == 'y'
    listed = client.get('/v1.0/logitem').json()
    assert [row['id'] for row in listed].count(5) == 1


def test_empty_fields_are_omitted(client):
    r = post_item(client)
    body = r.json()
    assert body['result_code'] == 0
    assert 'machine_id' not in body
    assert 'info' not in body
    assert 'client_timestamp' not in body
    assert set(body) == {'id', 'result_code', 'inserted_datetime'}


def test_client_timestamp_is_returned(client):
    body = post_item(client, client_timestamp=1500000000).json()
    assert body['client_timestamp'] == 1500000000


def test_list_empty_is_array(client):
    r = client.get('/v1.0/logitem')
    assert r.status_code == 200
    assert r.json() == []


def test_list_returns_all_in_insertion_order(client):
    for n in range(5):
        post_item(client, result_code=n)
    rows = client.get('/v1.0/logitem').json()
    assert [row['result_code'] for row in rows] == [0, 1, 2, 3, 4]
    stamps = [row['inserted_datetime'] for row in rows]
    assert stamps == sorted(stamps)


def test_update_replaces_whole_record(client):
    post_item(client, id=7, result_code=1, machine_id='box', info='old')
    r = client.post('/v1.0/logitem/7', json={'result_code': 1, 'info': 'new'})
    assert r.status_code == 200
    assert isinstance(r.json(), list)

    got = client.get('/v1.0/logitem/7').json()
    assert got['info'] == 'new'
    assert 'machine_id' not in got


def test_update_path_id_wins_over_body(client):
    r = client.post('/v1.0/logitem/9', json={'id': 3, 'result_code': 1, 'info': 'path'})
    assert r.status_code == 200
    assert [row['id'] for row in r.json()] == [9]
    assert client.get('/v1.0/logitem/3').status_code == 404


def test_update_creates_when_absent(client):
    r = client.post('/v1.0/logitem/11', json={'result_code': 4})
    assert r.status_code == 200
    assert client.get('/v1.0/logitem/11').json()['result_code'] == 4


def test_get_missing_is_404(client):
    r = client.get('/v1.0/logitem/404')
    assert r.status_code == 404
    assert '404' in r.json()['detail']


def test_delete_missing_is_404_and_store_unchanged(client):
    post_item(client, info='keep')
    r = client.delete('/v1.0/logitem/999')
    assert r.status_code == 404
    assert len(client.get('/v1.0/logitem').json()) == 1


def test_delete_returns_remaining(client):
    post_item(client, info='a')
    post_item(client, info='b')
    r = client.delete('/v1.0/logitem/1')
    assert r.status_code == 200
    assert [row['info'] for row in r.json()] == ['b']


def test_malformed_json_is_400(client):
    r = client.post(
        '/v1.0/logitem',
        content=b'{"result_code": ',
        headers={'Content-Type': 'application/json'},
    )
    assert r.status_code == 400
    assert client.get('/v1.0/logitem').json() == []


def test_wrong_type_is_400(client):
    r = client.post('/v1.0/logitem', json={'result_code': 'zero'})
    assert r.status_code == 400


def test_missing_result_code_is_400(client):
    r = client.post('/v1.0/logitem', json={'info': 'no code'})
    assert r.status_code == 400
    assert 'result_code' in r.json()['detail']


def test_update_malformed_is_400(client):
    r = client.post('/v1.0/logitem/3', json=['not', 'an', 'object'])
    assert r.status_code == 400
    assert client.get('/v1.0/logitem').json() == []


def test_non_numeric_id_is_400(client):
    assert client.get('/v1.0/logitem/abc').status_code == 400


def test_store_failure_is_500(store):
    class NoRowsStore(RecordStore):
        def _write(self, session, item):
            return 0, 0

    client = TestClient(create_app(NoRowsStore(store.engine)))
    r = client.post('/v1.0/logitem', json={'result_code': 0})
    assert r.status_code == 500
    assert r.json()['detail']


def test_not_found_detail_is_localized(client):
    r = client.get('/v1.0/logitem/8', headers={'X-Locale': 'ru'})
    assert r.status_code == 404
    assert r.headers['Content-Language'] == 'ru'
    assert r.json()['detail'] == 'Запись журнала 8 не найдена'


def test_unknown_locale_falls_back_to_english(client):
    r = client.get('/v1.0/logitem/8', headers={'X-Locale': 'xx'})
    assert r.json()['detail'] == 'Log item 8 not found'


def test_nulls_read_as_empty_values(client):
    r = client.post(
        '/v1.0/logitem',
        json={'id': None, 'result_code': 1, 'machine_id': None, 'info': None, 'client_timestamp': None},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body['id'] == 1
    assert body['result_code'] == 1
    assert 'machine_id' not in body
    assert 'info' not in body
    assert 'client_timestamp' not in body


def test_update_with_nulls_replaces_fields(client):
    post_item(client, id=4, machine_id='box', info='old')
    r = client.post('/v1.0/logitem/4', json={'result_code': 0, 'machine_id': None, 'info': 'new'})
    assert r.status_code == 200
    got = client.get('/v1.0/logitem/4').json()
    assert got['info'] == 'new'
    assert 'machine_id' not in got


def test_out_of_range_body_integers_are_400(client):
    for body in (
        {'result_code': 2**63},
        {'result_code': -(2**63) - 1},
        {'result_code': 0, 'client_timestamp': 2**63},
        {'result_code': 0, 'id': 2**63},
    ):
        r = client.post('/v1.0/logitem', json=body)
        assert r.status_code == 400, body
    assert client.get('/v1.0/logitem').json() == []


def test_int64_bounds_are_accepted(client):
    r = post_item(client, id=2**63 - 1, result_code=-(2**63), client_timestamp=2**63 - 1)
    assert r.status_code == 200, r.text
    assert r.json()['id'] == 2**63 - 1


def test_out_of_range_path_id_is_400(client):
    big = 99999999999999999999
    assert client.get(f'/v1.0/logitem/{big}').status_code == 400
    assert client.delete(f'/v1.0/logitem/{big}').status_code == 400
    assert client.post(f'/v1.0/logitem/{big}', json={'result_code': 0}).status_code == 400
    assert client.get('/v1.0/logitem').json() == []


def test_app_without_store_is_503():
    client = TestClient(create_app())
    r = client.get('/v1.0/logitem')
    assert r.status_code == 503
    assert r.json()['detail'] == 'Log store is not available'
