from passlib.context import CryptContext
from jose import JWTError , jwt 
from datetime import timedelta
from fastapi.security import OAuth2PasswordBearer
from fastapi import Depends , HTTPException , status
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from database_models import utcnow
from auth.models import User
from core.config import SECRET_KEY , ALGORITHM , ACCESS_TOKEN_EXPIRE_MINUTES , REFRESH_TOKEN_EXPIRE_DAYS
import secrets



# password storing and hashing

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)

def hash_password(password : str) -> str:
     return pwd_context.hash(password)

def verify_password(plain_password : str , hashed_password : str) -> bool:
     return pwd_context.verify(plain_password , hashed_password)



# function for creating token

def create_access_token(data:dict):  # access token creation
     to_encode = data.copy()

     expire = utcnow() + timedelta(
          minutes = ACCESS_TOKEN_EXPIRE_MINUTES
     )

     to_encode.update({"exp":expire})

     encoded_jwt = jwt.encode(
          to_encode,
          SECRET_KEY,
          algorithm=ALGORITHM
     )

     return encoded_jwt



# getting the current user 

#token extractor
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login" , auto_error=False)


def _credentials_error() -> HTTPException:
     return HTTPException(
          status_code=status.HTTP_401_UNAUTHORIZED,
          detail="Could not validate credentials",
          headers={"WWW-Authenticate": "Bearer"},
     )


def resolve_user_from_token(token : str , db : Session) -> User:

     try : 
          payload = jwt.decode(
               token,
               SECRET_KEY,
               algorithms=[ALGORITHM]
          )
     
     except JWTError :
          raise _credentials_error()
     

     user_id = payload.get("user_id")

     if user_id is None :
          raise _credentials_error()
     

     user = db.query(User).filter(User.id == user_id).first()

     if user is None:
          raise _credentials_error()
     
     return user 


def get_current_user(
          token : str =  Depends(oauth2_scheme) ,
          db : Session = Depends(get_db)
          ):
     return resolve_user_from_token(token , db)


def get_optional_user(
          token : Optional[str] = Depends(optional_oauth2_scheme) ,
          db : Session = Depends(get_db)
          ) -> Optional[User]:
     # anonymous callers get None, a bad token is still rejected
     if not token:
          return None
     return resolve_user_from_token(token , db)


# creating the function to create and secure the refresh token
# 32 bytes keeps the urlsafe token under bcrypt's 72 byte input limit

def generate_refresh_token() -> str:
     return secrets.token_urlsafe(32)    # generating the refresh token


def hash_refresh_token(token : str) -> str:
     return pwd_context.hash(token)    # hashing the token for safety


def verify_refresh_token(token :str , hash_token : str) -> bool:
     return pwd_context.verify(token , hash_token)  # verifying the token and the hashed token

def get_refresh_token_expiry(days : int = REFRESH_TOKEN_EXPIRE_DAYS):
     return utcnow() + timedelta(days=days) # checking the expiry time



def create_refresh_token_pair() -> dict:
     
     refresh_token = generate_refresh_token()

     return {
          "refresh_token" : refresh_token,
          "token_hash" : hash_refresh_token(refresh_token),
          "expires_at" : get_refresh_token_expiry(),
     }
