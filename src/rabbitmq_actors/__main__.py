from rabbitmq_actors.main import app

app(prog_name="rabbitmq-actors")
