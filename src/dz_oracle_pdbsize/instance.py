import os,sys,re;

PMON_PREFIX     = 'ora_pmon_';
DEFAULT_EXCLUDE = ('asm','apx','mgmtdb');

# rac instances of the same database run as <db>_1, <db>_2
INSTANCE_SUFFIX = re.compile(r'_[1-2]$');

###############################################################################
def is_pmon_token(
    token  : str
) -> bool:

   if token is None:
      return False;

   return token.startswith(PMON_PREFIX) and len(token) > len(PMON_PREFIX);

###############################################################################
def is_excluded(
    token  : str
   ,markers: tuple = DEFAULT_EXCLUDE
) -> bool:

   if markers is None:
      return False;

   low = token.lower();
   for item in markers:
      if item is not None and item.strip() != "" and item.strip().lower() in low:
         return True;

   return False;

###############################################################################
def strip_instance_suffix(
    name   : str
) -> str:

   if name.startswith(PMON_PREFIX):
      name = name[len(PMON_PREFIX):];

   return INSTANCE_SUFFIX.sub('',name);

###############################################################################
def canonicalize(
    raw    : str
) -> str:

   return strip_instance_suffix(raw.strip()).lower();

###############################################################################
class DatabaseInstance(object):

   def __init__(
       self
      ,raw_process_name: str
      ,canonical_name  : str = None
   ):

      self._raw_process_name = raw_process_name;

      if canonical_name is None:
         self._canonical_name = canonicalize(raw_process_name);
      else:
         self._canonical_name = canonical_name.lower();

   @property
   def raw_process_name(self):
      return self._raw_process_name;

   @property
   def canonical_name(self):
      return self._canonical_name;

   @property
   def raw_name(self):
      """Process derived name with its original case, suffix removed."""
      return strip_instance_suffix(self._raw_process_name);

   def __eq__(self,other):
      if not isinstance(other,DatabaseInstance):
         return NotImplemented;
      return self._canonical_name == other._canonical_name;

   def __hash__(self):
      return hash(self._canonical_name);

   def __repr__(self):
      return 'DatabaseInstance(' + repr(self._raw_process_name) + ', ' + repr(self._canonical_name) + ')';
