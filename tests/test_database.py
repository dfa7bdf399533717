import threading

from api.core.database import Database


def _enter_in_thread(database):
    entered = threading.Event()
    done = threading.Event()

    def worker():
        with database.scoped_session():
            entered.set()
        done.set()

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    return thread, entered, done


def test_in_memory_sessions_take_turns():
    database = Database("sqlite://")
    database.create_all()
    try:
        with database.scoped_session():
            thread, entered, _ = _enter_in_thread(database)
            assert not entered.wait(0.2)
        assert entered.wait(2)
        thread.join(2)
    finally:
        database.dispose()


def test_lock_released_after_error():
    database = Database("sqlite://")
    try:
        try:
            with database.scoped_session():
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        thread, entered, _ = _enter_in_thread(database)
        assert entered.wait(2)
        thread.join(2)
    finally:
        database.dispose()


def test_file_database_sessions_run_concurrently(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'lms.db'}")
    database.create_all()
    try:
        assert not database.shared_connection
        with database.scoped_session():
            thread, entered, done = _enter_in_thread(database)
            assert entered.wait(2)
            assert done.wait(2)
        thread.join(2)
    finally:
        database.dispose()


def test_concurrent_requests_share_one_database(client, admin):
    results = []

    def fetch():
        results.append(client.get("/api/users/", headers=admin.headers).status_code)

    threads = [threading.Thread(target=fetch) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)
    assert results == [200] * 8
