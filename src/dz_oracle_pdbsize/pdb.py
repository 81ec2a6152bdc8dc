import os,sys;

from .result import StepResult,ENUMERATION_FAILURE;

SEED_PDB = 'PDB$SEED';

READ_WRITE = 'READ WRITE';
READ_ONLY  = 'READ ONLY';
MOUNTED    = 'MOUNTED';
OTHER      = 'OTHER';

OPEN_MODES = (READ_WRITE,READ_ONLY,MOUNTED);

SQL_PDBS_WITH_MODE = """
   SELECT
    name
   ,open_mode
   FROM
   v$pdbs
   WHERE
   name NOT IN ('PDB$SEED')
""";

SQL_PDBS = """
   SELECT
   name
   FROM
   v$pdbs
   WHERE
   name NOT IN ('PDB$SEED')
""";

###############################################################################
def normalize_open_mode(
    pin    : str
) -> str:

   if pin is None:
      return None;

   pin1 = ' '.join(str(pin).split()).upper();
   if pin1 in OPEN_MODES:
      return pin1;

   return OTHER;

###############################################################################
class PluggableDatabase(object):

   def __init__(
       self
      ,name      : str
      ,open_mode : str = None
   ):

      self._name          = name;
      self._raw_open_mode = open_mode;
      self._open_mode     = normalize_open_mode(open_mode);

   @property
   def name(self):
      return self._name;

   @property
   def open_mode(self):
      return self._open_mode;

   @property
   def raw_open_mode(self):
      return self._raw_open_mode;

   @property
   def is_writable(self):
      # anything other than exactly READ WRITE counts as down
      return self._raw_open_mode == READ_WRITE;

   @property
   def is_seed(self):
      return self._name.upper() == SEED_PDB;

   def __repr__(self):
      return 'PluggableDatabase(' + repr(self._name) + ', ' + repr(self._open_mode) + ')';

###############################################################################
def pdbs_from_rows(
    rows
   ,check_open_mode: bool = True
) -> list:

   rez = [];

   for row in rows:
      if row is None or len(row) == 0:
         continue;

      name = row[0];
      if name is None or str(name).strip() == '':
         continue;
      name = str(name).strip();

      if check_open_mode:
         status = row[1] if len(row) > 1 else None;
         if status is None or str(status).strip() == '':
            continue;
         item = PluggableDatabase(name,str(status).strip());

      else:
         item = PluggableDatabase(name);

      if item.is_seed:
         continue;

      rez.append(item);

   return rez;

###############################################################################
class PdbEnumerator(object):

   def __init__(
       self
      ,client
      ,check_open_mode: bool = True
   ):

      self._client          = client;
      self._check_open_mode = check_open_mode;

   @property
   def check_open_mode(self):
      return self._check_open_mode;

   ############################################################################
   def enumerate(
       self
      ,context
      ,tracing = None
   ):

      if self._check_open_mode:
         str_sql = SQL_PDBS_WITH_MODE;
         columns = 2;
      else:
         str_sql = SQL_PDBS;
         columns = 1;

      rez = self._client.query(
          context
         ,str_sql
         ,columns = columns
         ,tracing = tracing
      );

      if not rez.ok:
         return StepResult.failure(
             ENUMERATION_FAILURE
            ,'Failed to query v$pdbs: ' + str(rez.message)
         );

      pdbs = pdbs_from_rows(rez.value,self._check_open_mode);

      if len(pdbs) == 0:
         return StepResult.failure(
             ENUMERATION_FAILURE
            ,'No PDBs found or not a CDB.'
         );

      return StepResult.success(pdbs);
