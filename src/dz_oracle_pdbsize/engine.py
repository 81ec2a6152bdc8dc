import os,sys;

from .tracing import Tracing;
from .pdb import PdbEnumerator;
from .report import SizeReporter,ReportFormat,ERROR;
from .result import DiscoveryEmptyError,CLIENT_UNAVAILABLE,SIZE_QUERY_FAILURE;

###############################################################################
class Engine(object):
   """
   One reporting pass.  Databases are handled strictly one after another
   and each gets its own connection context from the resolver.  Only an
   empty discovery stops the pass; every other failure is written to the
   diagnostic stream and the pass moves on to the next PDB or database.
   """

   def __init__(
       self
      ,discovery
      ,resolver
      ,client
      ,fmt             : ReportFormat = None
      ,check_open_mode : bool         = True
      ,tracing         : Tracing      = None
      ,out             = None
   ):

      self._discovery  = discovery;
      self._resolver   = resolver;
      self._client     = client;
      self._fmt        = fmt if fmt is not None else ReportFormat();
      self._tracing    = tracing if tracing is not None else Tracing();
      self._out        = out if out is not None else sys.stdout;

      self._enumerator = PdbEnumerator(client,check_open_mode = check_open_mode);
      self._reporter   = SizeReporter(client,check_open_mode = check_open_mode);

      self._instances  = [];
      self._reports    = [];
      self._failures   = [];

   @property
   def instances(self):
      return self._instances;

   @property
   def reports(self):
      return self._reports;

   @property
   def failures(self):
      return self._failures;

   ############################################################################
   def emit(
       self
      ,line : str
   ):

      self._out.write(line + "\n");
      self._out.flush();

   ############################################################################
   def fail(
       self
      ,db_name: str
      ,pdb    : str
      ,result
   ):

      self._failures.append((db_name,pdb,result.error_kind,result.message));
      self._tracing.write(1,db_name,pdb,result.message);

   ############################################################################
   def run(self) -> int:

      self._instances = [];
      self._reports   = [];
      self._failures  = [];

      rez = self._discovery.discover(self._tracing);

      if not rez.ok:
         self._failures.append((None,None,rez.error_kind,rez.message));
         self._tracing.write(1,None,None,rez.message);
         raise DiscoveryEmptyError(rez.message);

      self._instances = list(rez.value);

      if self._fmt.header:
         self.emit(self._fmt.format_header());

      for instance in self._instances:
         self.process_database(instance);

      return 0;

   ############################################################################
   def process_database(
       self
      ,instance
   ):

      db_name = instance.canonical_name;

      ctx = self._resolver.resolve(instance,self._tracing);
      if not ctx.ok:
         self.fail(db_name,None,ctx);
         return;

      context = ctx.value;

      if not self._client.is_available(context):
         self._failures.append((db_name,None,CLIENT_UNAVAILABLE,self._client.name + ' not found.'));
         self._tracing.write(1,db_name,None,self._client.name + ' not found.');
         return;

      pdbs = self._enumerator.enumerate(context,self._tracing);
      if not pdbs.ok:
         self.fail(db_name,None,pdbs);
         return;

      for pdb in pdbs.value:
         item = self._reporter.report(context,pdb,self._tracing);

         if item.status == ERROR:
            self._failures.append((db_name,pdb.name,SIZE_QUERY_FAILURE,item.message));

         self._reports.append(item);
         self.emit(self._fmt.format_line(item));
