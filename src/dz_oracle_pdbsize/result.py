import os,sys;

DISCOVERY_EMPTY     = 'DISCOVERY_EMPTY';
RESOLUTION_FAILURE  = 'RESOLUTION_FAILURE';
CLIENT_UNAVAILABLE  = 'CLIENT_UNAVAILABLE';
ENUMERATION_FAILURE = 'ENUMERATION_FAILURE';
SIZE_QUERY_FAILURE  = 'SIZE_QUERY_FAILURE';
PDB_CLOSED          = 'PDB_CLOSED';

# returned by a sql client, translated by the caller into one of the above
QUERY_FAILURE       = 'QUERY_FAILURE';

ERROR_KINDS = (
    DISCOVERY_EMPTY
   ,RESOLUTION_FAILURE
   ,CLIENT_UNAVAILABLE
   ,ENUMERATION_FAILURE
   ,SIZE_QUERY_FAILURE
   ,PDB_CLOSED
   ,QUERY_FAILURE
);

###############################################################################
class DiscoveryEmptyError(Exception):
   pass;

###############################################################################
class StepResult(object):

   def __init__(
       self
      ,value      = None
      ,error_kind : str = None
      ,message    : str = None
   ):

      if error_kind is not None and error_kind not in ERROR_KINDS:
         raise ValueError('unknown error kind ' + str(error_kind));

      self._value      = value;
      self._error_kind = error_kind;
      self._message    = message;

   @classmethod
   def success(cls,value):
      return cls(value = value);

   @classmethod
   def failure(cls,error_kind,message = None):
      return cls(error_kind = error_kind,message = message);

   @property
   def ok(self):
      return self._error_kind is None;

   @property
   def value(self):
      return self._value;

   @property
   def error_kind(self):
      return self._error_kind;

   @property
   def message(self):
      return self._message;

   def __repr__(self):
      if self.ok:
         return 'StepResult(value=' + repr(self._value) + ')';
      return 'StepResult(' + self._error_kind + ', ' + repr(self._message) + ')';
