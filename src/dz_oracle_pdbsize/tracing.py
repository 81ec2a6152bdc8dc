import os,sys;

###############################################################################
class Tracing(object):

   def __init__(
       self
      ,stream = None
      ,level  : int = 1
   ):

      self._stream = stream if stream is not None else sys.stderr;
      self._level  = level;

   @property
   def stream(self):
      return self._stream;

   @property
   def level(self):
      return self._level;

   @level.setter
   def level(self,value):
      self._level = value;

   ############################################################################
   def write(
       self
      ,level  : int
      ,db_name: str
      ,pdb    : str
      ,msg    : str
   ):
      # level 0 is never written so that a quiet pass stays quiet
      if level > self._level or self._level == 0:
         return;

      if db_name is not None and pdb is not None:
         prefix = "DEBUG: Database " + str(db_name) + ", PDB " + str(pdb) + ": ";
      elif db_name is not None:
         prefix = "DEBUG: Database " + str(db_name) + ": ";
      else:
         prefix = "DEBUG: ";

      self._stream.write(prefix + str(msg) + "\n");
      self._stream.flush();
