import os,sys;

from .util import bytes2gb;
from .parser import parse_number;
from .result import StepResult,SIZE_QUERY_FAILURE,PDB_CLOSED;

OK    = 'OK';
DOWN  = 'DOWN';
ERROR = 'ERROR';

# each total is an independent scan so the four figures are not a consistent read
SQL_USED_BYTES = """
   SELECT
    (SELECT NVL(SUM(bytes),0) FROM v$datafile)
   ,(SELECT NVL(SUM(bytes),0) FROM v$tempfile)
   ,(SELECT NVL(SUM(bytes),0) FROM v$log)
   ,(SELECT NVL(SUM(bytes),0) FROM dba_free_space)
   FROM
   dual
""";

###############################################################################
def compute_used_gb(
    datafile_bytes: float
   ,tempfile_bytes: float
   ,redolog_bytes : float
   ,free_bytes    : float
) -> float:

   rez = 0;
   for item in (datafile_bytes,tempfile_bytes,redolog_bytes):
      if item is not None:
         rez += item;

   if free_bytes is not None:
      rez -= free_bytes;

   return round(bytes2gb(rez),2);

###############################################################################
class SizeReport(object):

   def __init__(
       self
      ,pdb_name : str
      ,used_gb  : float = None
      ,status   : str   = OK
      ,message  : str   = None
   ):

      if status not in (OK,DOWN,ERROR):
         raise ValueError('unknown report status ' + str(status));

      if status == OK and used_gb is None:
         raise ValueError('an OK report needs a size');

      self._pdb_name = pdb_name.lower();
      self._used_gb  = used_gb if status == OK else None;
      self._status   = status;
      self._message  = message;

   @property
   def pdb_name(self):
      return self._pdb_name;

   @property
   def used_gb(self):
      return self._used_gb;

   @property
   def status(self):
      return self._status;

   @property
   def message(self):
      return self._message;

   def __repr__(self):
      return 'SizeReport(' + repr(self._pdb_name) + ', ' + repr(self._used_gb) + ', ' + self._status + ')';

###############################################################################
class ReportFormat(object):

   def __init__(
       self
      ,name_width : int  = 20
      ,value_width: int  = 15
      ,unit_suffix: str  = None
      ,header     : bool = False
      ,down_text  : str  = 'pdb is down'
      ,error_text : str  = 'error'
   ):

      self._name_width  = name_width;
      self._value_width = value_width;
      self._unit_suffix = unit_suffix if unit_suffix else None;
      self._header      = header;
      self._down_text   = down_text;
      self._error_text  = error_text;

   @property
   def unit_suffix(self):
      return self._unit_suffix;

   @property
   def header(self):
      return self._header;

   @property
   def down_text(self):
      return self._down_text;

   @property
   def error_text(self):
      return self._error_text;

   ############################################################################
   def format_header(self) -> str:
      return 'database'.ljust(self._name_width) + 'database_size'.ljust(self._value_width);

   ############################################################################
   def format_line(
       self
      ,report
   ) -> str:

      if report.status == DOWN:
         return report.pdb_name.ljust(self._name_width) + self._down_text.ljust(self._value_width);

      if report.status == ERROR:
         return report.pdb_name.ljust(self._name_width) + self._error_text.ljust(self._value_width);

      rez = report.pdb_name.ljust(self._name_width) + ('%.2f' % report.used_gb).ljust(self._value_width);

      if self._unit_suffix is not None:
         rez += ' ' + self._unit_suffix;

      return rez;

###############################################################################
class SizeReporter(object):

   def __init__(
       self
      ,client
      ,check_open_mode: bool = True
   ):

      self._client          = client;
      self._check_open_mode = check_open_mode;

   ############################################################################
   def used_gb(
       self
      ,context
      ,pdb_name : str
      ,tracing  = None
   ):

      rez = self._client.query(
          context
         ,SQL_USED_BYTES
         ,columns   = 4
         ,container = pdb_name
         ,tracing   = tracing
      );

      if not rez.ok:
         return StepResult.failure(SIZE_QUERY_FAILURE,'Failed to get size: ' + str(rez.message));

      if len(rez.value) == 0:
         return StepResult.failure(SIZE_QUERY_FAILURE,'Failed to get size: no rows returned.');

      # sqlplus may echo feedback lines ahead of the data row
      totals     = None;
      last_error = None;
      for row in reversed(rez.value):
         try:
            totals = [parse_number(item) for item in row];
            break;

         except ValueError as e:
            last_error = e;

      if totals is None:
         return StepResult.failure(SIZE_QUERY_FAILURE,'Failed to get size: ' + str(last_error));

      return StepResult.success(compute_used_gb(*totals));

   ############################################################################
   def report(
       self
      ,context
      ,pdb
      ,tracing = None
   ):

      if self._check_open_mode and not pdb.is_writable:
         if tracing is not None:
            tracing.write(2,context.db_name,pdb.name,'open mode is ' + str(pdb.raw_open_mode) + ', ' + PDB_CLOSED);
         return SizeReport(pdb.name,status = DOWN);

      rez = self.used_gb(context,pdb.name,tracing);

      if not rez.ok:
         if tracing is not None:
            tracing.write(1,context.db_name,pdb.name,rez.message);
         return SizeReport(pdb.name,status = ERROR,message = rez.message);

      return SizeReport(pdb.name,used_gb = rez.value);
