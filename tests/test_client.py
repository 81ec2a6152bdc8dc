import os;
import pytest;
import oracledb;
from unittest import mock;

from conftest import FakeCommands,make_context;

from dz_oracle_pdbsize.client import SqlPlusClient,OracleDbClient,SQ_COMMAND;
from dz_oracle_pdbsize.result import QUERY_FAILURE;

def test_script_settings_before_container_switch():
   client = SqlPlusClient();

   script = client.script("SELECT 1 FROM dual;",container = "SALESPDB");
   lines  = script.splitlines();

   assert lines[0] == "SET HEADING OFF FEEDBACK OFF PAGESIZE 0 LINESIZE 200 NUMWIDTH 38";
   assert lines[1] == "WHENEVER SQLERROR EXIT FAILURE";
   assert lines[3] == "ALTER SESSION SET CONTAINER = SALESPDB;";
   assert lines[4] == "SELECT 1 FROM dual;";
   assert lines[-1] == "EXIT";

def test_script_quotes_mixed_case_container():
   script = SqlPlusClient().script("SELECT 1 FROM dual",container = "SalesPdb");
   assert 'ALTER SESSION SET CONTAINER = "SalesPdb";' in script;

def test_query_runs_client_with_context_environment():
   cmds   = FakeCommands({'sqlplus':(0,"SALESPDB  READ WRITE\nHRPDB  MOUNTED\n",'')});
   client = SqlPlusClient(run_command = cmds);
   ctx    = make_context('sales');

   rez = client.query(ctx,"SELECT name, open_mode FROM v$pdbs",columns = 2);

   assert rez.ok;
   assert rez.value == [("SALESPDB","READ WRITE"),("HRPDB","MOUNTED")];

   args,env,script = cmds.calls[0];
   assert args == ['sqlplus','-s','/ as sysdba'];
   assert env['ORACLE_SID'] == 'sales';
   assert "v$pdbs" in script;

def test_query_nonzero_exit_is_failure():
   cmds   = FakeCommands({'sqlplus':(1,"",'')});
   client = SqlPlusClient(run_command = cmds);

   rez = client.query(make_context('sales'),"SELECT 1 FROM dual");

   assert not rez.ok;
   assert rez.error_kind == QUERY_FAILURE;
   assert rez.message == "sqlplus exited with code 1";

def test_query_ora_message_is_failure_even_with_zero_exit():
   cmds   = FakeCommands({'sq':(0,"ERROR:\nORA-01034: ORACLE not available\n",'')});
   client = SqlPlusClient(command = SQ_COMMAND,run_command = cmds);

   rez = client.query(make_context('sales'),"SELECT 1 FROM dual");

   assert not rez.ok;
   assert rez.message == "ORA-01034: ORACLE not available";

def test_is_available_searches_context_path(tmp_path):
   bindir = tmp_path / "bin";
   bindir.mkdir();
   exe = bindir / "sqlplus";
   exe.write_text("#!/bin/sh\n");
   exe.chmod(0o755);

   client = SqlPlusClient();

   assert client.is_available(make_context('sales',path = str(bindir)));
   assert not client.is_available(make_context('sales',path = str(tmp_path / "nothing")));
   assert client.name == "sqlplus";

def test_empty_command_rejected():
   with pytest.raises(Exception):
      SqlPlusClient(command = []);

###############################################################################
def fake_connection(rows = None,error = None):
   curs = mock.Mock();
   curs.fetchall.return_value = rows or [];
   if error is not None:
      curs.execute.side_effect = [None,error];
   conn = mock.Mock();
   conn.cursor.return_value = curs;
   return conn,curs;

def test_oracledb_client_with_user():
   conn,curs = fake_connection(rows = [(64 * 2**30,8 * 2**30,4 * 2**30,6 * 2**30)]);
   connect   = mock.Mock(return_value = conn);
   client    = OracleDbClient(user = 'system',password = 'x',dsn = 'dbhost/{db}',connect = connect);

   rez = client.query(make_context('sales'),"SELECT 1 FROM dual",columns = 4,container = 'SALESPDB');

   assert rez.ok;
   assert rez.value == [(64 * 2**30,8 * 2**30,4 * 2**30,6 * 2**30)];
   assert connect.call_args.kwargs['dsn'] == 'dbhost/sales';
   assert connect.call_args.kwargs['mode'] == oracledb.AUTH_MODE_SYSDBA;
   assert curs.execute.call_args_list[0].args[0] == "ALTER SESSION SET CONTAINER = SALESPDB";
   conn.close.assert_called_once();

def test_oracledb_client_database_error():
   conn,curs = fake_connection(error = oracledb.DatabaseError("ORA-00942: table or view does not exist"));
   client    = OracleDbClient(user = 'system',password = 'x',dsn = 'dbhost/{db}',connect = mock.Mock(return_value = conn));

   rez = client.query(make_context('sales'),"SELECT 1 FROM dual",container = 'SALESPDB');

   assert not rez.ok;
   assert rez.error_kind == QUERY_FAILURE;
   assert "ORA-00942" in rez.message;
   conn.close.assert_called_once();

def test_oracledb_client_connect_error():
   connect = mock.Mock(side_effect = oracledb.DatabaseError("ORA-12541: TNS:no listener"));
   client  = OracleDbClient(user = 'system',password = 'x',dsn = 'dbhost/{db}',connect = connect);

   rez = client.query(make_context('sales'),"SELECT 1 FROM dual");

   assert not rez.ok;
   assert "ORA-12541" in rez.message;

def test_oracledb_client_needs_dsn_for_user():
   with pytest.raises(Exception):
      OracleDbClient(user = 'system',password = 'x');

def test_oracledb_client_availability(tmp_path):
   (tmp_path / "lib").mkdir();
   client = OracleDbClient();

   assert client.is_available(make_context('sales',home = str(tmp_path)));
   assert not client.is_available(make_context('sales',home = str(tmp_path / "missing")));
   assert OracleDbClient(user = 'u',password = 'p',dsn = 'd').is_available(make_context('sales'));

def test_oracledb_client_local_connection_restores_environment(monkeypatch):
   conn,curs = fake_connection(rows = [("SALESPDB","READ WRITE")]);
   seen      = {};

   def connect(**kwargs):
      seen['sid']    = os.environ.get('ORACLE_SID');
      seen['kwargs'] = kwargs;
      return conn;

   init = mock.Mock();
   monkeypatch.setattr(oracledb,'init_oracle_client',init);
   monkeypatch.setattr(OracleDbClient,'_thick_mode',False);
   monkeypatch.setenv('ORACLE_SID','previous');

   rez = OracleDbClient(connect = connect).query(make_context('sales'),"SELECT name, open_mode FROM v$pdbs",columns = 2);

   assert rez.ok;
   assert seen['sid'] == 'sales';
   assert seen['kwargs']['externalauth'] is True;
   assert os.environ['ORACLE_SID'] == 'previous';
   init.assert_called_once_with();
