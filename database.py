from sqlalchemy import create_engine # making the engine 
from sqlalchemy.orm import sessionmaker

from core.config import DATABASE_URL

connect_args = {}

if DATABASE_URL.startswith("sqlite"):
   connect_args["check_same_thread"] = False   # sessions cross threadpool workers

engine = create_engine(DATABASE_URL, connect_args=connect_args) # creating the engine 

sessionLocal = sessionmaker(     # making the session 
    autocommit = False,
    autoflush= False,
    bind=engine 
)


def get_db():
   db = sessionLocal()

   try :
      yield db

   finally :
      db.close()
