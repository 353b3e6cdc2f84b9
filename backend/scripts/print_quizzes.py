import os, sys
BASE = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE not in sys.path:
    sys.path.insert(0, BASE)
from studyquiz.config import DATABASE_URL
from studyquiz.db.session import make_session_factory
from studyquiz.storage.sql import SqlDocumentStore
from studyquiz.quiz_pipeline import QUIZZES_COLLECTION
import pprint

def main():
    url = sys.argv[1] if len(sys.argv) > 1 else DATABASE_URL
    store = SqlDocumentStore(make_session_factory(url))
    pprint.pprint(store.list(QUIZZES_COLLECTION))

if __name__ == "__main__":
    main()
