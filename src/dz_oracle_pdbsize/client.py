import os,sys,shutil;
import oracledb;

from .util import run_command as util_run_command,dzq;
from .parser import parse_rows,error_lines;
from .result import StepResult,QUERY_FAILURE;

SQLPLUS_COMMAND = ['sqlplus','-s','/ as sysdba'];
SQ_COMMAND      = ['sq'];

SQLPLUS_SETTINGS = 'SET HEADING OFF FEEDBACK OFF PAGESIZE 0 LINESIZE 200 NUMWIDTH 38';

###############################################################################
class SqlClient(object):
   """
   Executes one query against the database described by a connection
   context and hands back rows.  Failures come back as a QUERY_FAILURE
   StepResult carrying the client message, never as an exception.
   """

   @property
   def name(self):
      raise NotImplementedError();

   def is_available(
       self
      ,context
   ) -> bool:
      raise NotImplementedError();

   def query(
       self
      ,context
      ,str_sql  : str
      ,columns  : int = 1
      ,container: str = None
      ,tracing  = None
   ):
      raise NotImplementedError();

###############################################################################
class SqlPlusClient(SqlClient):

   def __init__(
       self
      ,command     : list = None
      ,run_command = None
   ):

      self._command     = list(command) if command is not None else list(SQLPLUS_COMMAND);
      self._run_command = run_command if run_command is not None else util_run_command;

      if len(self._command) == 0:
         raise Exception('sql client command is empty.');

   @property
   def command(self):
      return list(self._command);

   @property
   def name(self):
      return os.path.basename(self._command[0]);

   ############################################################################
   def is_available(
       self
      ,context
   ) -> bool:

      return shutil.which(self._command[0],path = context.path) is not None;

   ############################################################################
   def script(
       self
      ,str_sql  : str
      ,container: str = None
   ) -> str:

      # settings go first so the container switch prints no feedback line
      rez  = SQLPLUS_SETTINGS + "\n";
      rez += "WHENEVER SQLERROR EXIT FAILURE\n";
      rez += "WHENEVER OSERROR EXIT FAILURE\n";

      if container is not None:
         rez += "ALTER SESSION SET CONTAINER = " + dzq(container) + ";\n";

      rez += str_sql.strip().rstrip(';') + ";\n";
      rez += "EXIT\n";

      return rez;

   ############################################################################
   def query(
       self
      ,context
      ,str_sql  : str
      ,columns  : int = 1
      ,container: str = None
      ,tracing  = None
   ):

      script = self.script(str_sql,container);

      if tracing is not None:
         tracing.write(2,context.db_name,container,script.replace("\n"," "));

      rc,out,err = self._run_command(
          self._command
         ,env     = context.environ
         ,input   = script
         ,tracing = tracing
      );

      errs = error_lines(out) + error_lines(err);

      if rc != 0 or len(errs) > 0:
         if len(errs) > 0:
            msg = errs[0];
         elif err.strip() != '':
            msg = err.strip().splitlines()[0];
         else:
            msg = self._command[0] + ' exited with code ' + str(rc);

         return StepResult.failure(QUERY_FAILURE,msg);

      return StepResult.success(parse_rows(out,columns));

###############################################################################
class OracleDbClient(SqlClient):
   """
   Native driver variant.  Without a user the connection is made in thick
   mode as SYSDBA with operating system authentication against the local
   instance named by ORACLE_SID, just like sqlplus "/ as sysdba".  With a
   user the dsn may carry {db} and {sid} placeholders.
   """

   _thick_mode = False;

   def __init__(
       self
      ,user     : str = None
      ,password : str = None
      ,dsn      : str = None
      ,connect  = None
   ):

      self._user     = user;
      self._password = password;
      self._dsn      = dsn;
      self._connect  = connect if connect is not None else oracledb.connect;

      if self._user is not None and self._dsn is None:
         raise Exception('a dsn is required when connecting with a user.');

   @property
   def name(self):
      return "oracledb";

   @property
   def user(self):
      return self._user;

   @property
   def dsn(self):
      return self._dsn;

   ############################################################################
   def is_available(
       self
      ,context
   ) -> bool:

      if self._user is not None:
         return True;

      return context.oracle_home is not None and os.path.isdir(
         os.path.join(context.oracle_home,'lib')
      );

   ############################################################################
   def connection(
       self
      ,context
   ):

      if self._user is not None:
         return self._connect(
             user     = self._user
            ,password = self._password
            ,dsn      = self._dsn.format(db = context.db_name,sid = context.oracle_sid)
            ,mode     = oracledb.AUTH_MODE_SYSDBA
         );

      if not OracleDbClient._thick_mode:
         oracledb.init_oracle_client();
         OracleDbClient._thick_mode = True;

      # a bequeath connection has no dsn, the client library takes the
      # instance from ORACLE_SID and ORACLE_HOME in the process environment
      # so they are set for the duration of the connect only
      saved = {};
      for key in ('ORACLE_SID','ORACLE_HOME'):
         saved[key] = os.environ.get(key);

      os.environ['ORACLE_SID']  = context.oracle_sid;
      os.environ['ORACLE_HOME'] = context.oracle_home;

      try:
         return self._connect(
             mode         = oracledb.AUTH_MODE_SYSDBA
            ,externalauth = True
         );

      finally:
         for key,val in saved.items():
            if val is None:
               os.environ.pop(key,None);
            else:
               os.environ[key] = val;

   ############################################################################
   def query(
       self
      ,context
      ,str_sql  : str
      ,columns  : int = 1
      ,container: str = None
      ,tracing  = None
   ):

      try:
         orcl = self.connection(context);

      except oracledb.Error as e:
         return StepResult.failure(QUERY_FAILURE,str(e).strip());

      try:
         curs = orcl.cursor();

         if container is not None:
            str_alter = "ALTER SESSION SET CONTAINER = " + dzq(container);
            if tracing is not None:
               tracing.write(2,context.db_name,container,str_alter);
            curs.execute(str_alter);

         if tracing is not None:
            tracing.write(2,context.db_name,container,str_sql);

         curs.execute(str_sql.strip().rstrip(';'));

         rez = [];
         for row in curs.fetchall():
            row = tuple(row)[:columns];
            rez.append(row + ('',) * (columns - len(row)));

         curs.close();

      except oracledb.Error as e:
         return StepResult.failure(QUERY_FAILURE,str(e).strip());

      finally:
         orcl.close();

      return StepResult.success(rez);
