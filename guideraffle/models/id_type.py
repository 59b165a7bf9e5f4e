from sqlalchemy import BigInteger, Integer

# Ledger surrogate keys: BigInteger in production databases, plain Integer on
# SQLite so the column is a rowid alias and autoincrements.
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
